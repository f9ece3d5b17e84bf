"""Django applications of the campaign booking service."""
