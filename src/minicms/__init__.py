"""Mini CMS page menus."""
