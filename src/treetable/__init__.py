"""treetable - hierarchical CRUD and tree loading over a uniform contract"""

__version__ = "0.1.0"
