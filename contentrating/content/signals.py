# ---------------- CONTENT LIFECYCLE SIGNALS ----------------
# Extensions hook into node loading, saving, deleting, validation, display and
# the node / node type forms by connecting receivers to these signals.
from django.dispatch import Signal

# items=list[ContentItem], types=set[str]
nodes_loaded = Signal()

# item=ContentItem, fired on the first save of a node
node_inserted = Signal()

# item=ContentItem, fired on every later save
node_updated = Signal()

# nid=int, fired before the node and its revisions are removed
node_deleted = Signal()

# item=ContentItem, form=NodeForm
node_validating = Signal()

# item=ContentItem, context=dict with a "content" dict of rendered pieces
node_viewing = Signal()

# form=NodeForm, node_type=NodeType, item=ContentItem | None
node_form_building = Signal()

# form=NodeTypeForm, node_type=NodeType | None
node_type_form_building = Signal()

# node_type=NodeType, cleaned_data=dict
node_type_saved = Signal()
