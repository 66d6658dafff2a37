# src/algoimpact/__main__.py
import sys

from algoimpact.app import main

sys.exit(main())
