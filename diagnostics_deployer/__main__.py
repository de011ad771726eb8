import sys

from diagnostics_deployer.main import main

sys.exit(main())
