"""Nest polling service entrypoint.

Polls every registered nest sensor unit over HTTP and renders the
latest temperature, humidity and vibration readings.

Usage: python -m nestmon.nest
"""

from nestmon.nest.polling import main

if __name__ == "__main__":
    main()
