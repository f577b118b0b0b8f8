#!/usr/bin/env python3
"""
Main entry point for the theme park operations demo.
Loads configuration, builds the park, runs the walk-through and saves bookings.
"""

from themepark.app import main


if __name__ == "__main__":
    main()
