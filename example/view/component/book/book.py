from dataclasses import dataclass
from datetime import datetime
from typing import Annotated


# Opts defines options for the Book templ component.
#
# templ:component-opts
@dataclass
class Opts:
    title: str
    author: str
    published: datetime
    display: Annotated[bool, 'default:"True"']
