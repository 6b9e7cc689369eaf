class GameConfigurationError(ValueError):
    """Raised before a session starts when the requested setup cannot be built."""


class UnknownDifficultyError(GameConfigurationError):
    def __init__(self, difficulty):
        super().__init__(f"Unknown difficulty '{difficulty}'")
        self.difficulty = difficulty


class UnknownCategoryError(GameConfigurationError):
    def __init__(self, category):
        super().__init__(f"Unknown symbol category '{category}'")
        self.category = category


class InsufficientSymbolsError(GameConfigurationError):
    def __init__(self, required: int, available: int, pool_name: str = 'symbol pool'):
        super().__init__(
            f"Not enough symbols in {pool_name} for {required} pairs. "
            f"Required: {required}, Available: {available}"
        )
        self.required = required
        self.available = available
