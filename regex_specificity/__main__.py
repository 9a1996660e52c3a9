import sys

from regex_specificity.cli import main

sys.exit(main())
