"""LabHub - back-office for the robotics lab's project proposals."""
__version__ = "1.0.0"
