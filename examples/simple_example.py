#!/usr/bin/env python3
"""
Simple Example: Map Marker Labels

Render a few labels the way a map view would place them as marker icons.
"""

from labelgen import LabelCache, StyleConfig, load_config, render, render_labels

# Load config (for font directories and style presets)
config = load_config()
base = config.style()

# A single label, anchored by its right edge and pushed 80px to the right
style = StyleConfig(
    size=60,
    color="#0000FF",
    opacity=0.8,
    anchor="right",
    offset=(80, 0),
)
result = render("Hi", style)
result.image.save("hi.png")
print(f"✓ Label saved to: hi.png (anchor {result.anchor.as_tuple()})")

# City labels with a soft white halo, rendered in parallel
city = base.model_copy(update={"size": 24, "halo_width": 3, "halo_blur": 2.0, "max_width": 120})
results = render_labels([
    ("Berlin", city),
    ("Frankfurt am Main", city),
    ("Rome", city.model_copy(update={"rotation": 30.0, "anchor": "bottom"})),
])
for i, label in enumerate(results):
    label.image.save(f"city_{i}.png")
    print(f"✓ Label saved to: city_{i}.png ({label.width}x{label.height}px)")

# Markers only re-render when their text or style changes
cache = LabelCache()
marker = cache.get("marker-1", "Berlin", city)
assert cache.get("marker-1", "Berlin", city) is marker
