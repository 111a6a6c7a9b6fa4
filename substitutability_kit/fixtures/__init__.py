# Reptile lesson fixtures
# The hierarchy used to explain substitutability, as Python declarations and YAML

from pathlib import Path

LESSON_PATH = Path(__file__).parent / "reptiles.yaml"
