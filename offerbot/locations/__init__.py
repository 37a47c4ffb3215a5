"""
Location resolution: geocoding free text into points or bounding boxes.
"""
