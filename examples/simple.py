#!/usr/bin/env python3
"""Simple example showing mode toggles on a Govee kettle."""
import asyncio

from govee_kettle import GoveeKettle, GoveeKettleBLEClient, InMemoryControlSurface


async def main():
    # Replace with your kettle's MAC address
    MAC_ADDRESS = "AA:BB:CC:DD:EE:FF"

    surface = InMemoryControlSurface(
        on_change=lambda key, value: print(f"  {key} -> {value}")
    )
    client = GoveeKettleBLEClient(
        MAC_ADDRESS, notification_callback=lambda batch: kettle.handle_batch(batch)
    )
    kettle = GoveeKettle(client, surface)

    async with kettle:
        print(f"Connecting to {MAC_ADDRESS}...")
        await client.connect()
        try:
            print("Connected!")

            print("\nSelecting green tea...")
            await kettle.async_apply_toggle("green_tea", True)

            # Let the kettle report its temperature
            await asyncio.sleep(5)
            print(f"Temperature: {surface.temperature}")

            print("Stopping...")
            await kettle.async_apply_toggle("green_tea", False)
        finally:
            await client.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
