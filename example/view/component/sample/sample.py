from dataclasses import dataclass
from typing import Annotated


# Opts provides a series of options for the Sample templ component.
#
# templ:component-opts
@dataclass
class Opts:
    name: str
    age: int
    happy: Annotated[bool, 'default:"True"']
