"""Allow ``python -m princeinstall``."""

from princeinstall.main import main

main()
