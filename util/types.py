# util/types.py
from typing import Any, Awaitable, Callable, Dict, List


# Flow: collaborator capabilities consumed by the pipeline.
# generate(prompt) -> text, may raise.
GenerateFn = Callable[[str], Awaitable[str]]
# search(query) -> raw result items.
SearchFn = Callable[[str], Awaitable[List[Dict[str, Any]]]]
