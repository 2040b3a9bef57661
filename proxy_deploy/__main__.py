import sys

from proxy_deploy.cli import main

sys.exit(main())
