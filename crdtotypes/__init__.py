import importlib

mod = "crdtotypes"
class LazyLoader:
    """
    Lazy loader for the crdtotypes functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item.startswith("__"):
            raise AttributeError(item)
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "convert_crd_to_package": (f"{mod}.crdtopackage", "convert_crd_to_package"),
    "PackageGenerator": (f"{mod}.crdtopackage", "PackageGenerator"),
    "CustomResource": (f"{mod}.resources", "CustomResource"),
    "add_resource_types": (f"{mod}.resources", "add_resource_types"),
    "resolve_type": (f"{mod}.typeresolver", "resolve_type"),
    "register_type": (f"{mod}.typeresolver", "register_type"),
    "combine_schemas": (f"{mod}.combineschemas", "combine_schemas"),
    "TypeRegistry": (f"{mod}.typeregistry", "TypeRegistry"),
    "build_package": (f"{mod}.packagebuilder", "build_package"),
    "BuildError": (f"{mod}.packagebuilder", "BuildError"),
    "validate_package": (f"{mod}.packagevalidator", "validate_package"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
