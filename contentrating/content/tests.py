from django.contrib.auth import get_user_model
from django.db.models import ProtectedError
from django.test import TestCase
from django.urls import reverse

from .models import Node, NodeRevision, NodeType
from .signals import node_deleted, node_inserted, node_updated, nodes_loaded


class SignalRecorder:
    def __init__(self, signal):
        self.calls = []
        self.signal = signal
        signal.connect(self)

    def __call__(self, sender, **kwargs):
        self.calls.append(kwargs)

    def disconnect(self):
        self.signal.disconnect(self)


class NodeRevisionTests(TestCase):

    def setUp(self):
        self.page_type = NodeType.objects.create(type='page', name='Basic page')

    def record(self, signal):
        recorder = SignalRecorder(signal)
        self.addCleanup(recorder.disconnect)
        return recorder

    def test_first_save_writes_revision_and_fires_insert(self):
        inserted = self.record(node_inserted)
        updated = self.record(node_updated)

        node = Node(type=self.page_type)
        item = node.save_revision({'title': 'About', 'body': 'Who we are'})

        self.assertEqual(node.vid, item.vid)
        self.assertEqual(NodeRevision.objects.get(vid=node.vid).body, 'Who we are')
        self.assertEqual(len(inserted.calls), 1)
        self.assertEqual(inserted.calls[0]['item'].nid, node.nid)
        self.assertEqual(updated.calls, [])

    def test_later_saves_fire_update(self):
        node = Node(type=self.page_type)
        first = node.save_revision({'title': 'About'})
        updated = self.record(node_updated)

        second = node.save_revision({'title': 'About us'})

        self.assertNotEqual(first.vid, second.vid)
        self.assertEqual(node.revisions.count(), 2)
        self.assertEqual(updated.calls[0]['item'].vid, second.vid)

    def test_save_without_new_revision_rewrites_current(self):
        node = Node(type=self.page_type)
        first = node.save_revision({'title': 'About', 'body': 'Old'})
        second = node.save_revision({'title': 'About', 'body': 'New'}, new_revision=False)

        self.assertEqual(first.vid, second.vid)
        self.assertEqual(node.revisions.count(), 1)
        self.assertEqual(NodeRevision.objects.get(vid=first.vid).body, 'New')

    def test_load_builds_items_at_current_revision(self):
        loaded = self.record(nodes_loaded)
        node = Node(type=self.page_type)
        node.save_revision({'title': 'About', 'body': 'Old'})
        node.save_revision({'title': 'About', 'body': 'New'})

        items = Node.objects.load([node.nid, 9999])

        self.assertEqual(len(items), 1)
        self.assertEqual((items[0].vid, items[0].body, items[0].type), (node.vid, 'New', 'page'))
        self.assertEqual(loaded.calls[0]['types'], {'page'})

    def test_load_of_nothing_fires_nothing(self):
        loaded = self.record(nodes_loaded)
        self.assertEqual(Node.objects.load([]), [])
        self.assertEqual(loaded.calls, [])

    def test_delete_fires_signal_and_removes_revisions(self):
        deleted = self.record(node_deleted)
        node = Node(type=self.page_type)
        node.save_revision({'title': 'About'})
        nid = node.nid

        node.delete()

        self.assertEqual(deleted.calls[0]['nid'], nid)
        self.assertFalse(NodeRevision.objects.filter(node_id=nid).exists())

    def test_queryset_delete_fires_signal_for_each_node(self):
        deleted = self.record(node_deleted)
        first, second = Node(type=self.page_type), Node(type=self.page_type)
        first.save_revision({'title': 'About'})
        second.save_revision({'title': 'Contact'})

        Node.objects.all().delete()

        self.assertEqual(sorted(call['nid'] for call in deleted.calls), sorted([first.nid, second.nid]))

    def test_type_with_content_cannot_be_deleted(self):
        Node(type=self.page_type).save_revision({'title': 'About'})
        with self.assertRaises(ProtectedError):
            self.page_type.delete()


class NodeViewTests(TestCase):

    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user('author', password='secret')
        self.admin = User.objects.create_user('editor', password='secret', is_staff=True)
        self.page_type = NodeType.objects.create(type='page', name='Basic page')

    def test_create_and_view_node(self):
        self.client.force_login(self.user)
        response = self.client.post(reverse('node_add', args=['page']), {'title': 'About', 'body': 'Who we are'})

        node = Node.objects.get()
        self.assertRedirects(response, reverse('node_detail', args=[node.nid]))

        response = self.client.get(reverse('node_detail', args=[node.nid]))
        self.assertContains(response, 'Who we are')

    def test_missing_node_is_404(self):
        response = self.client.get(reverse('node_detail', args=[9999]))
        self.assertEqual(response.status_code, 404)

    def test_edit_creates_new_revision(self):
        node = Node(type=self.page_type)
        node.save_revision({'title': 'About'})
        self.client.force_login(self.user)

        self.client.post(reverse('node_edit', args=[node.nid]), {'title': 'About us', 'revision': 'on'})

        node.refresh_from_db()
        self.assertEqual(node.title, 'About us')
        self.assertEqual(node.revisions.count(), 2)

    def test_delete_requires_post(self):
        node = Node(type=self.page_type)
        node.save_revision({'title': 'About'})
        self.client.force_login(self.user)

        self.assertEqual(self.client.get(reverse('node_delete', args=[node.nid])).status_code, 405)
        self.client.post(reverse('node_delete', args=[node.nid]))
        self.assertFalse(Node.objects.exists())

    def test_node_type_edit_is_staff_only(self):
        self.client.force_login(self.user)
        response = self.client.get(reverse('node_type_edit', args=['page']))
        self.assertEqual(response.status_code, 302)

        self.client.force_login(self.admin)
        response = self.client.get(reverse('node_type_edit', args=['page']))
        self.assertContains(response, 'Enable rating')
