"""SELECT clause generation."""

from typing import Iterable, List, Optional

from ..model import RDFModel

__all__ = [
    "SelectGenerator",
]


class SelectGenerator:
    """Build the ``SELECT`` line for requested variables."""

    def __init__(self, model: RDFModel, variables: Optional[Iterable[str]] = None):
        self.model = model
        names = model.object_names() if variables is None else list(variables)
        self.variables = list(dict.fromkeys(model.variable_name_for(name) for name in names))

    def generate(self) -> List[str]:
        return ["SELECT " + " ".join(f"?{name}" for name in self.variables)]
