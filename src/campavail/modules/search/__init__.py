from campavail.modules.search.filter import filter_available_camps

__all__ = ["filter_available_camps"]
