"""filekeeper: divisão de ficheiros por linhas e limpeza de diretórios."""

__version__ = "1.0.0"
