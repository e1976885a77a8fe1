class Environment:
    """Scope chain kept as an arena of scopes.

    Every scope is a dict plus the index of its parent scope. `current` is the
    innermost scope; lookups walk parent links from there and writes only ever
    touch the dict at the index they resolve to. Scope 0 is the global scope
    and is never popped.

    Not thread-safe: one evaluator owns an environment at a time.
    """

    def __init__(self):
        self.scopes = [{}]
        self.parents = [None]
        self.current = 0

    @property
    def depth(self) -> int:
        count = 0
        index = self.current
        while index is not None:
            count += 1
            index = self.parents[index]
        return count

    def push_scope(self):
        self.scopes.append({})
        self.parents.append(self.current)
        self.current = len(self.scopes) - 1

    def pop_scope(self):
        if self.current == 0:
            raise RuntimeError("cannot pop the global scope")
        index = self.current
        self.current = self.parents[index]
        # only block scopes exist, so the popped scope is always the newest one
        if index == len(self.scopes) - 1:
            self.scopes.pop()
            self.parents.pop()

    def define(self, name: str, value):
        self.scopes[self.current][name] = value

    def resolve(self, name: str) -> int | None:
        index = self.current
        while index is not None:
            if name in self.scopes[index]:
                return index
            index = self.parents[index]
        return None

    def get(self, name: str):
        index = self.resolve(name)
        if index is None:
            raise KeyError(name)
        return self.scopes[index][name]

    def assign(self, name: str, value) -> bool:
        index = self.resolve(name)
        if index is None:
            return False
        self.scopes[index][name] = value
        return True

    def __contains__(self, name):
        return self.resolve(name) is not None

    def __repr__(self):
        return f"Environment(depth={self.depth}, names={sorted(self.scopes[self.current])})"
