"""Release lookup for Apache httpd and .NET release metadata, described as DepVersion records."""

__version__ = "0.1.0"