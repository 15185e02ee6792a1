import logging

from django.db import models, transaction
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .items import ContentItem
from .signals import node_deleted, node_inserted, node_updated, nodes_loaded

logger = logging.getLogger(__name__)


# ---------------- NODE TYPE ----------------
class NodeType(models.Model):
    type = models.SlugField(max_length=32, primary_key=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


# ---------------- NODE ----------------
class NodeManager(models.Manager):

    def load(self, nids):
        """Load nodes at their current revision and let extensions annotate them."""
        nodes = list(self.filter(nid__in=nids).order_by('nid'))
        revisions = NodeRevision.objects.in_bulk([n.vid for n in nodes if n.vid])
        items = [node.as_item(revision=revisions.get(node.vid)) for node in nodes]

        if items:
            nodes_loaded.send(sender=Node, items=items, types={item.type for item in items})
        return items


class Node(models.Model):
    nid = models.AutoField(primary_key=True)
    type = models.ForeignKey(NodeType, related_name='nodes', on_delete=models.PROTECT)
    title = models.CharField(max_length=255)
    # Current revision, empty until the first revision is written
    vid = models.PositiveIntegerField(null=True, blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = NodeManager()

    def __str__(self):
        return self.title

    def as_item(self, revision=None, values=None):
        values = dict(values or {})
        rating = values.get('rating')
        return ContentItem(
            nid=self.nid,
            vid=self.vid,
            type=self.type_id,
            title=values.get('title', self.title),
            body=values.get('body', revision.body if revision else ''),
            rating=None if rating in (None, '') else int(rating),
            values=values,
        )

    def save_revision(self, values, new_revision=True, log=''):
        """
        Save the node with the submitted values.
        The first save always writes a revision and fires node_inserted; later
        saves fire node_updated and either write a new revision or rewrite the
        current one in place.
        """
        is_new = self._state.adding

        with transaction.atomic():
            self.title = values.get('title', self.title)
            self.save()

            if is_new or new_revision or self.vid is None:
                revision = NodeRevision.objects.create(
                    node=self,
                    title=self.title,
                    body=values.get('body', ''),
                    log=log,
                )
                self.vid = revision.vid
                self.save(update_fields=['vid', 'updated_at'])
            else:
                NodeRevision.objects.filter(vid=self.vid).update(
                    title=self.title,
                    body=values.get('body', ''),
                )

            item = self.as_item(values=values)
            if is_new:
                node_inserted.send(sender=Node, item=item)
            else:
                node_updated.send(sender=Node, item=item)

        logger.info("Saved node %s at revision %s", self.nid, self.vid)
        return item


# ---------------- NODE REVISION ----------------
class NodeRevision(models.Model):
    vid = models.AutoField(primary_key=True)
    node = models.ForeignKey(Node, related_name='revisions', on_delete=models.CASCADE)
    title = models.CharField(max_length=255)
    body = models.TextField(blank=True)
    log = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-vid']

    def __str__(self):
        return f"Revision {self.vid} of node {self.node_id}"


# ---------------- DELETION ----------------
@receiver(pre_delete, sender=Node)
def announce_node_deletion(sender, instance, **kwargs):
    """
    Sent for every deleted node, queryset and admin bulk deletes included,
    so extensions can remove what they store for it.
    """
    node_deleted.send(sender=Node, nid=instance.nid)
    logger.info("Deleting node %s", instance.nid)
