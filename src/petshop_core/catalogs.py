"""
Reference catalogs for the pet onboarding form.

Display labels for the fixed enumerations and the per-species breed
dictionary behind the breed autocomplete. The wizard receives a
``BreedCatalog`` instance, so shops can ship their own list.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .models.pet import PetSize, PetSpecies, PetTemperament
from .utils.datetime_utils import MAX_AGE_BRACKET, MIN_AGE_BRACKET, format_age_bracket
from .utils.validation import fold_text

SPECIES_LABELS: Dict[PetSpecies, str] = {
    PetSpecies.DOG: "Cão",
    PetSpecies.CAT: "Gato",
    PetSpecies.BIRD: "Ave",
    PetSpecies.RABBIT: "Coelho",
    PetSpecies.HAMSTER: "Hamster",
    PetSpecies.FISH: "Peixe",
    PetSpecies.TURTLE: "Tartaruga",
    PetSpecies.OTHER: "Outro",
}

# (label, weight range)
SIZE_LABELS: Dict[PetSize, tuple] = {
    PetSize.SMALL: ("Pequeno", "< 10kg"),
    PetSize.MEDIUM: ("Médio", "10-25kg"),
    PetSize.LARGE: ("Grande", "25-45kg"),
    PetSize.GIANT: ("Gigante", "> 45kg"),
}

TEMPERAMENT_LABELS: Dict[PetTemperament, str] = {
    PetTemperament.CALM: "Calmo e tranquilo",
    PetTemperament.ACTIVE: "Ativo e brincalhão",
    PetTemperament.ANXIOUS: "Ansioso ou nervoso",
    PetTemperament.AGGRESSIVE: "Agressivo ou territorial",
    PetTemperament.FEARFUL: "Medroso",
    PetTemperament.FRIENDLY: "Sociável e amigável",
}

AGE_BRACKETS: List[str] = [
    str(years) for years in range(MIN_AGE_BRACKET, MAX_AGE_BRACKET + 1)
]

DEFAULT_BREEDS: Dict[PetSpecies, List[str]] = {
    PetSpecies.DOG: [
        "SRD (Vira-lata)",
        "Labrador Retriever",
        "Golden Retriever",
        "Pastor Alemão",
        "Bulldog Francês",
        "Bulldog Inglês",
        "Poodle",
        "Shih Tzu",
        "Yorkshire Terrier",
        "Lhasa Apso",
        "Spitz Alemão (Lulu da Pomerânia)",
        "Maltês",
        "Pinscher",
        "Dachshund (Salsicha)",
        "Beagle",
        "Border Collie",
        "Rottweiler",
        "Pit Bull",
        "Boxer",
        "Schnauzer",
        "Pug",
        "Chihuahua",
        "Husky Siberiano",
        "Dogue Alemão",
        "Fila Brasileiro",
        "São Bernardo",
    ],
    PetSpecies.CAT: [
        "SRD (Vira-lata)",
        "Persa",
        "Siamês",
        "Maine Coon",
        "Angorá",
        "Ragdoll",
        "British Shorthair",
        "Sphynx",
        "Bengal",
        "Himalaio",
        "Exótico",
    ],
    PetSpecies.BIRD: [
        "Calopsita",
        "Periquito Australiano",
        "Canário",
        "Agapornis",
        "Papagaio",
        "Cacatua",
    ],
    PetSpecies.RABBIT: [
        "Mini Lop",
        "Fuzzy Lop",
        "Lionhead",
        "Holland Lop",
        "Angorá",
        "Rex",
    ],
    PetSpecies.HAMSTER: [
        "Sírio",
        "Anão Russo",
        "Chinês",
        "Roborovski",
    ],
    PetSpecies.FISH: [
        "Betta",
        "Kinguio",
        "Guppy",
        "Neon",
        "Acará-Bandeira",
    ],
    PetSpecies.TURTLE: [
        "Tigre d'Água",
        "Jabuti-Piranga",
        "Tartaruga-de-Orelha-Vermelha",
    ],
    PetSpecies.OTHER: [],
}


def _as_species(species: Union[PetSpecies, str, None]) -> Optional[PetSpecies]:
    if species is None or species == "":
        return None
    if isinstance(species, PetSpecies):
        return species
    try:
        return PetSpecies(species)
    except ValueError:
        return None


class BreedCatalog:
    """In-memory breed dictionary with substring search."""

    def __init__(
        self, breeds: Optional[Mapping[Union[PetSpecies, str], Iterable[str]]] = None
    ):
        """
        Initialize the catalog.

        Args:
            breeds: Mapping of species (enum or value) to breed names;
                defaults to ``DEFAULT_BREEDS``
        """
        source = DEFAULT_BREEDS if breeds is None else breeds
        self._breeds: Dict[PetSpecies, List[str]] = {}
        for species, names in source.items():
            key = _as_species(species)
            if key is None:
                raise ValueError(f"Unknown species in breed catalog: {species!r}")
            self._breeds[key] = list(names)

    def breeds_for(self, species: Union[PetSpecies, str, None]) -> List[str]:
        """All breeds known for a species, in catalog order."""
        key = _as_species(species)
        if key is None:
            return []
        return list(self._breeds.get(key, []))

    def suggest(
        self,
        species: Union[PetSpecies, str, None],
        query: str = "",
        limit: int = 8,
    ) -> List[str]:
        """
        Suggest breeds for the autocomplete.

        Matching is a case- and accent-insensitive substring test. An empty
        query returns the first ``limit`` breeds.

        Example:
            >>> BreedCatalog().suggest("dog", "retr")
            ['Labrador Retriever', 'Golden Retriever']
        """
        candidates = self.breeds_for(species)
        needle = fold_text(query.strip()) if query else ""
        if needle:
            candidates = [name for name in candidates if needle in fold_text(name)]
        if limit <= 0:
            return []
        return candidates[:limit]

    def species(self) -> Sequence[PetSpecies]:
        """Species that have an entry in the catalog."""
        return list(self._breeds.keys())


def species_label(species: Union[PetSpecies, str, None]) -> str:
    """pt-BR label for a species value, or the raw value when unknown."""
    key = _as_species(species)
    if key is None:
        return str(species or "")
    return SPECIES_LABELS[key]


def size_label(size: Union[PetSize, str, None]) -> str:
    """pt-BR label for a size value, or the raw value when unknown."""
    if not size:
        return ""
    try:
        key = size if isinstance(size, PetSize) else PetSize(size)
    except ValueError:
        return str(size)
    return SIZE_LABELS[key][0]


def temperament_label(temperament: Union[PetTemperament, str, None]) -> str:
    """pt-BR label for a temperament value, or the raw value when unknown."""
    if not temperament:
        return ""
    try:
        key = (
            temperament
            if isinstance(temperament, PetTemperament)
            else PetTemperament(temperament)
        )
    except ValueError:
        return str(temperament)
    return TEMPERAMENT_LABELS[key]


def age_label(age: Optional[str]) -> str:
    """Display text for an age bracket."""
    return format_age_bracket(age)
