import sys

from phrasekit.cli import main

sys.exit(main())
