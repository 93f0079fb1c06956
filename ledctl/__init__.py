"""Control board LEDs over serial using the UniversalLedControl line protocol."""
