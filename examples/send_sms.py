"""
Send SMS example.
"""

import sys
from gsmdriver import GsmModem

# Replace with your serial port
PORT = "/dev/ttyUSB0"


def main():
    """Main function."""
    if len(sys.argv) != 3:
        print(f"Usage: {sys.argv[0]} <recipient> <message>")
        sys.exit(1)

    recipient, text = sys.argv[1], sys.argv[2]

    with GsmModem(port=PORT) as modem:
        modem.network.wait_for_network()

        if modem.sms.send(recipient, text):
            print(f"Sent to {recipient}")
        else:
            print(f"Failed to send to {recipient}")
            sys.exit(1)


if __name__ == "__main__":
    main()
