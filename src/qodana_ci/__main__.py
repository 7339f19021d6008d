import sys

from qodana_ci.cli import main

sys.exit(main())
