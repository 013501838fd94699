"""
Receive SMS example.

Polls the modem in the background and prints every incoming message,
replying to each one.
"""

import logging
import time
from gsmdriver import GsmModem

# Replace with your serial port
PORT = "/dev/ttyUSB0"


def main():
    """Main function."""
    logging.basicConfig(filename="gsmdriver.log", level=logging.DEBUG)
    print("gsmdriver - Receive SMS Example\n")

    with GsmModem(port=PORT) as modem:

        def on_sms(sender, timestamp, text):
            print(f"\n[{timestamp}] {sender}: {text}")
            modem.sms.send(sender, f"Got your message: {text}")

        modem.sms.receive(on_sms, interval=5)
        print("Waiting for messages (Ctrl+C to stop)...\n")

        try:
            while True:
                time.sleep(1)

        except KeyboardInterrupt:
            print("\nStopping...")


if __name__ == "__main__":
    main()
