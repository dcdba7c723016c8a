from passer.core.format import size_to_string
from passer.core.lifetime import Lifetime
from passer.core.tasks import gather_ordered

__all__ = ["Lifetime", "gather_ordered", "size_to_string"]
