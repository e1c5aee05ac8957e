"""Core adjustment engine: data model, curves, hue bands and the pixel pipeline."""
