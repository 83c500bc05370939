from typing import Optional


class Environment:
    """Variable bindings of one calculator session, name -> last assigned value"""

    def __init__(self) -> None:
        self._variables: dict[str, float] = dict()

    def set(self, name: str, value: float) -> None:
        self._variables[name] = value

    def get(self, name: str) -> Optional[float]:
        return self._variables.get(name)

    def exists(self, name: str) -> bool:
        return name in self._variables

    def names(self) -> list[str]:
        return list(self._variables)

    def clear(self) -> None:
        self._variables.clear()

    def __repr__(self) -> str:
        return f"Environment({self._variables})"
