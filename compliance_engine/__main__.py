import sys

from compliance_engine.cli import main

sys.exit(main())
