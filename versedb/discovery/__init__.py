from .file_enumerator import FileEnumerator
from .project_locator import ProjectLocator, SearchMode

__all__ = ["FileEnumerator", "ProjectLocator", "SearchMode"]
