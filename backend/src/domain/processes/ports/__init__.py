from .process_repository_port import ProcessRepositoryPort

__all__ = ["ProcessRepositoryPort"]
