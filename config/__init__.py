from config.settings import Config, CompetitorConfig, load_competitors, load_config

__all__ = ["Config", "CompetitorConfig", "load_competitors", "load_config"]
