class LoxError(Exception):
    category = "Error"

    def __init__(self, line: int, message: str):
        super().__init__(message)
        self.line = line
        self.message = message

    def format(self, indent: str = "") -> str:
        return f"{indent}[line {self.line}] {self.category}: {self.message}"

    def __str__(self) -> str:
        return self.format()

    def __eq__(self, other):
        # errors are compared by what they report, so collected results can be asserted on
        if not isinstance(other, LoxError):
            return NotImplemented
        return type(self) is type(other) and self.line == other.line and self.message == other.message

    def __hash__(self):
        return hash((type(self), self.line, self.message))
