"""
Module de gestion de la configuration pour metricvp.
Centralise le chargement et l'accès à la configuration YAML.
"""

import copy
import os
import yaml

# Chemin par défaut du fichier de configuration
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "config.yaml")

# Configuration par défaut
DEFAULT_CONFIG = {
    "build_tree": {
        "bucket_size": 8,      # 0 = pas de feuilles, chaque nœud est un point de vue
        "metric": "euclidean",
        "seed": None           # None = point de vue tiré sans graine
    },
    "search": {
        "limit": 10,
        "max_distance": None,  # None = rayon infini
        "queries": 100,
        "n_jobs": 1,
        "use_faiss": True
    },
    "generate": {
        "n": 10000,
        "dims": 16,
        "seed": 42
    },
    "files": {
        "vectors_dir": ".",
        "trees_dir": ".",
        "default_vectors": "vectors.bin",
        "default_tree": "tree.vpt"
    }
}

class ConfigManager:
    """Gestionnaire de configuration pour metricvp."""

    def __init__(self, config_path=None):
        """
        Initialise le gestionnaire de configuration.

        Paramètres :
            config_path: Chemin vers le fichier de configuration YAML.
                         Si None, utilise le chemin par défaut.
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.config = self.load_config()

    def load_config(self):
        """
        Charge la configuration depuis le fichier YAML.

        Retourne :
            Dict: La configuration chargée, ou la configuration par défaut en cas d'erreur.
        """
        try:
            with open(self.config_path, "r") as f:
                config = yaml.safe_load(f)

            if not isinstance(config, dict):
                raise ValueError("le fichier ne contient pas de sections")

            self._ensure_complete_config(config)
            return config
        except (OSError, yaml.YAMLError, ValueError) as e:
            print(f"⚠️ Erreur lors du chargement de la configuration: {str(e)}")
            print(f"⚠️ Utilisation des paramètres par défaut")
            return copy.deepcopy(DEFAULT_CONFIG)

    def _ensure_complete_config(self, config):
        """
        Complète la configuration avec les sections et clés par défaut manquantes.

        Paramètres :
            config: Configuration à vérifier et compléter.
        """
        for section, default_values in DEFAULT_CONFIG.items():
            if not isinstance(config.get(section), dict):
                config[section] = copy.deepcopy(default_values)
            else:
                for key, value in default_values.items():
                    if key not in config[section]:
                        config[section][key] = value

    def get_section(self, section):
        """
        Récupère une section complète de la configuration.

        Paramètres :
            section: Nom de la section à récupérer.

        Retourne :
            Dict: La section demandée, ou un dictionnaire vide si la section n'existe pas.
        """
        return self.config.get(section, {})

    def get(self, section, key, default=None):
        """
        Récupère une valeur spécifique de la configuration.

        Paramètres :
            section: La section contenant la clé.
            key: La clé à récupérer.
            default: Valeur par défaut si la clé n'existe pas.
        """
        section_data = self.get_section(section)
        return section_data.get(key, default)

    def get_file_path(self, file_key, default=None):
        """
        Construit le chemin complet vers un fichier spécifié dans la configuration.

        Paramètres :
            file_key: Clé du fichier dans la section 'files'.
            default: Valeur par défaut si la clé n'existe pas.
        """
        files_section = self.get_section("files")

        if file_key.startswith("default_"):
            file_name = files_section.get(file_key, default)
            dir_key = "trees_dir" if "tree" in file_key else "vectors_dir"
            dir_path = files_section.get(dir_key, ".")
            return os.path.join(dir_path, file_name)
        return files_section.get(file_key, default)

    def reload(self, config_path=None):
        """
        Recharge la configuration depuis un nouveau fichier.

        Paramètres :
            config_path: Nouveau chemin de configuration. Si None, utilise le chemin actuel.
        """
        if config_path:
            self.config_path = config_path
        self.config = self.load_config()

    def __str__(self):
        return f"Configuration chargée depuis: {self.config_path}"

def load_config(config_path=None):
    """
    Fonction utilitaire pour charger rapidement une configuration.

    Retourne :
        ConfigManager: Instance du gestionnaire de configuration.
    """
    return ConfigManager(config_path)
