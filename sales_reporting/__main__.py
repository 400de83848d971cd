import sys

from sales_reporting.cli import main

sys.exit(main())
