from typing import Dict, List, Optional, Union

from tinybasic.program import Program

Value = Union[float, str, None]


class RuntimeContext:
    """Everything a running interpreter mutates, owned by one Interpreter."""

    def __init__(self, program: Optional[Program] = None):
        self.variables: Dict[str, Value] = {}
        self.program = program if program is not None else Program()
        self.stack: List[int] = []
        self.current_line = 0

    def reset(self):
        # Clears run state only; the stored program survives.
        self.variables.clear()
        self.stack.clear()
        self.current_line = 0
        return self

    def new_program(self):
        self.program.clear()
        return self.reset()
