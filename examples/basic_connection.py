"""
Basic connection example.

Demonstrates connecting to a modem and getting basic device information.
"""

from gsmdriver import GsmModem

# Replace with your serial port
PORT = "/dev/ttyUSB0"
PIN = "1234"


def main():
    """Main function."""
    print("gsmdriver - Basic Connection Example\n")

    # Connect to modem using context manager
    # This automatically initializes and closes the modem
    with GsmModem(port=PORT) as modem:
        print("Connected to modem!\n")

        print("=== Device Information ===")
        hw = modem.device.hardware()
        print(f"Manufacturer: {hw.manufacturer}")
        print(f"Model: {hw.model}")
        print(f"Revision: {hw.revision}")
        print(f"Serial: {hw.serial}")

        print("\n=== SIM Information ===")
        if modem.device.pin_required():
            accepted = modem.device.use_pin(PIN)
            print(f"PIN accepted: {accepted}")
        else:
            print("SIM ready")

        print("\n=== Network ===")
        print(f"Signal strength: {modem.network.wait_for_network()}")
        print(f"Band: {modem.network.band()} MHz")

    print("\nConnection closed.")


if __name__ == "__main__":
    main()
