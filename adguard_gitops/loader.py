"""Data loader for loading YAML files and validating with Pydantic models."""

import yaml
from pathlib import Path
from typing import List, Optional, Type, TypeVar
from pydantic import BaseModel, TypeAdapter
from rich.console import Console

console = Console()

# Type variable for Pydantic models
T = TypeVar('T', bound=BaseModel)


class DataLoader:
    """Load and validate YAML declaration files."""

    def __init__(self, base_path: str) -> None:
        """
        Initialize the DataLoader.

        Args:
            base_path: Base directory path containing the declaration folders
        """
        self.base_path = Path(base_path)

    def load_from_folder(self, subfolder: str, model: Type[T]) -> List[T]:
        """
        Recursively load .yaml files holding lists and validate every item.

        Args:
            subfolder: Relative path to the folder containing YAML files
            model: Pydantic model class to validate the data against

        Returns:
            List of validated Pydantic model instances

        Examples:
            >>> loader = DataLoader(".")
            >>> clients = loader.load_from_folder("adguard/clients", ClientModel)
        """
        target_dir: Path = self.base_path / subfolder
        results: List[T] = []

        if not target_dir.exists():
            console.print(f"[yellow]Warning: Folder {subfolder} not found.[/yellow]")
            return []

        files: List[Path] = sorted(target_dir.rglob("*.yaml"))

        # Wrong shapes (a mapping instead of a list, a scalar item) fail validation
        adapter = TypeAdapter(List[model])
        for file_path in files:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or []
            results.extend(adapter.validate_python(data))

        console.print(f"[dim]Loaded {len(results)} items from {subfolder}[/dim]")
        return results

    def load_file(self, relative_path: str, model: Type[T]) -> Optional[T]:
        """
        Load a single YAML mapping (singleton subsystems).

        Args:
            relative_path: Path of the file below the base path
            model: Pydantic model class to validate the data against

        Returns:
            Validated model, or None if the file does not exist
        """
        file_path: Path = self.base_path / relative_path
        if not file_path.exists():
            console.print(f"[dim]Skipping {relative_path} (not declared)[/dim]")
            return None

        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return model.model_validate(data)
