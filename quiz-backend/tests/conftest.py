import random

import pytest


SECTIONED_TEXT = """PHOTOSYNTHESIS
Photosynthesis is a process that converts light energy into chemical energy. It takes place in the chloroplasts of green plants. Chlorophyll absorbs red and blue light most strongly. The Calvin cycle produces glucose from carbon dioxide.

CELL RESPIRATION
Cellular respiration is a process that releases energy stored in glucose. Mitochondria produce about 36 ATP molecules from one glucose molecule. Oxygen is required for aerobic respiration in animal cells. The Krebs cycle occurs in the mitochondrial matrix.

PLANT TRANSPORT
Xylem is a tissue that carries water from the roots to the leaves. Phloem transports sugars produced during photosynthesis. Transpiration pulls water upward through the plant stem. Stomata open during the day to allow gas exchange.
"""

SOLAR_SYSTEM_TEXT = """The Sun is a star that contains 99.8 percent of the mass of the Solar System. Mercury is the smallest planet and orbits the Sun every 88 days. Venus has a thick atmosphere of carbon dioxide that traps heat. Earth is the only planet known to support life.

Mars is called the Red Planet because iron oxide covers its surface. Jupiter is the largest planet and has at least 95 known moons. Saturn is famous for its bright rings made of ice and rock. The Great Red Spot is a storm on Jupiter that has lasted for over 300 years.

Uranus has an axial tilt of 98 degrees and rotates on its side. Neptune was discovered in 1846 by Johann Galle using mathematical predictions. Pluto was reclassified as a dwarf planet in 2006 by the International Astronomical Union.

The asteroid belt lies between Mars and Jupiter. Comets are icy bodies that release gas when they approach the Sun. The Kuiper Belt is a region of icy objects beyond the orbit of Neptune. Meteorites are fragments of rock that survive the fall to Earth.

The Moon is the only natural satellite of Earth. Tides are caused by the gravitational pull of the Moon and the Sun. A solar eclipse occurs when the Moon passes between Earth and the Sun. Light from the Sun takes about 8 minutes to reach Earth.

The inner planets include Mercury, Venus, Earth, and Mars. The gas giants include Jupiter, Saturn, Uranus, and Neptune.
"""

# Enough paragraphs to segment, but no factual statements.
FACTLESS_TEXT = """Birds sang softly near the old wooden fence at dawn.

Leaves drifted slowly across the empty garden path.

Rain tapped gently against the kitchen window all night.

Children laughed loudly while chasing kites in the park.

Clouds rolled quietly over the distant green hills.
"""


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sectioned_text():
    return SECTIONED_TEXT


@pytest.fixture
def solar_text():
    return SOLAR_SYSTEM_TEXT


@pytest.fixture
def factless_text():
    return FACTLESS_TEXT
