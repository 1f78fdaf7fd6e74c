from .where import Where, split_list
from .settings import Settings
from .models import Architecture, DirectoryFileMatch, ClassifiedMatch, filter_by_architecture
from .errors import SearchError, InvalidArgument, Canceled
from .cancellation import CancellationToken
from .searcher import TreeSearcher
from .classifier import classify, classify_bytes
from .utils.processor import Processor, classify_all
