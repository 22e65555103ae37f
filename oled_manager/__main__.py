import sys

from .oled_manager import main

sys.exit(main())
