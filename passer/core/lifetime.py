class Lifetime:
    """
    Generation counter guarding asynchronous results against stale application.

    Every asynchronous step captures the current generation before awaiting and
    applies its result only if the generation is still current afterwards.
    Disposing the owner, or starting a newer step, invalidates older ones.

    Example:
        ```python
        lifetime = Lifetime()

        generation = lifetime.current
        data = await fetch()
        if not lifetime.is_current(generation):
            return  # owner went away, drop the result
        apply(data)
        ```
    """

    def __init__(self) -> None:
        self._generation = 0
        self._disposed = False

    @property
    def current(self) -> int:
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._disposed

    def advance(self) -> int:
        """Invalidate pending steps and return the new generation."""
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    def dispose(self) -> None:
        """Invalidate every pending step for good. Idempotent."""
        self._disposed = True
        self._generation += 1

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"generation={self._generation}"
        return f"{self.__class__.__name__}({state})"
