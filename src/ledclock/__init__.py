"""LED Matrix Clock for Raspberry Pi.

Clock faces for a 64x32 RGB LED panel:
- Analog clock with hands pointing at the panel border
- Letter clock showing date and time
- Automatic palette cycling with eased color fades
"""

__version__ = "1.0.0"
