from datetime import datetime

import pytest

from painlog.entry import UserMedication, build_lexicon

# Friday afternoon; every relative time in the suite resolves against it
NOW = datetime(2025, 3, 14, 16, 0)

MEDICATIONS = [
    UserMedication("Ibuprofen 400 mg", "med-1", "Ibuprofen"),
    UserMedication("Sumatriptan 50 mg", "med-2", "Sumatriptan"),
    UserMedication("Naproxen 500 mg", "med-3", "Naproxen"),
    UserMedication("Paracetamol 500 mg", "med-4", "Paracetamol"),
    UserMedication("Rizatriptan 10 mg", "med-5", "Rizatriptan"),
]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def medications():
    return list(MEDICATIONS)


@pytest.fixture(scope="session")
def lexicon():
    return build_lexicon(MEDICATIONS)
