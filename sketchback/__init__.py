"""
sketchback: recover Android layouts and activity sources from Sketchware
project backups.

A backup carries six obfuscated sections describing screens, their view trees
and their block logic. sketchback unpacks and decrypts them, rebuilds the trees
and renders each screen as a layout XML file and an activity Java class.
"""

__version__ = "1.0.0"
__author__ = "sketchback Team"
