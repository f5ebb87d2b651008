"""InkFlow: редактор документов с автосохранением, библиотекой и AI-ассистентом."""

__version__ = "1.0.0"
