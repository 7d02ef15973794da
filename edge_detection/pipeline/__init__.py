from .morphological_edges import morphological_gradient, dilation_erosion_edge_detection

__all__ = ["morphological_gradient", "dilation_erosion_edge_detection"]
