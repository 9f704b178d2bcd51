import sys

from carrousel.main import main

sys.exit(main())
