import sys

from possible_alerts.cli import main

sys.exit(main())
