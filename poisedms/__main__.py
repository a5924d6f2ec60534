import sys

from poisedms.main import main

sys.exit(main())
