import sys

from eqplus.main import main

sys.exit(main())
