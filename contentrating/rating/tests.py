from io import StringIO

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.template import Context, Template
from django.test import RequestFactory, TestCase
from django.urls import reverse

from content.forms import NodeForm, NodeTypeForm
from content.items import ContentItem
from content.models import Node, NodeType
from .config import RatingConfig
from .models import RatingRecord, RatingTypeSetting
from .store import REQUIRED_MESSAGE, RatingStore, RenderableRating


def article(nid=10, vid=101, rating=None, values=None, node_type='article'):
    return ContentItem(nid=nid, vid=vid, type=node_type, title='An article', rating=rating, values=values or {})


class RatingConfigTests(TestCase):

    def test_unset_type_does_not_participate(self):
        config = RatingConfig.load()
        self.assertFalse(config.is_participating('article'))
        self.assertFalse(config.get('article'))
        self.assertEqual(config.get('article', 'fallback'), 'fallback')

    def test_set_is_persisted_and_last_write_wins(self):
        RatingConfig().set('article', True)
        RatingConfig().set('article', False)
        RatingConfig().set('page', True)

        config = RatingConfig.load()
        self.assertFalse(config.is_participating('article'))
        self.assertTrue(config.is_participating('page'))
        self.assertEqual(RatingTypeSetting.objects.filter(node_type='article').count(), 1)

    def test_participating_filters_types(self):
        config = RatingConfig({'article': True, 'page': False})
        self.assertEqual(config.participating({'article', 'page', 'blog'}), {'article'})

    def test_forget_removes_setting(self):
        config = RatingConfig.load()
        config.set('article', True)
        config.forget('article')

        self.assertFalse(config.is_participating('article'))
        self.assertFalse(RatingTypeSetting.objects.exists())

    def test_load_reads_settings_in_one_query(self):
        RatingConfig().set('article', True)
        RatingConfig().set('page', False)

        with self.assertNumQueries(1):
            config = RatingConfig.load()

        self.assertEqual(config.participating({'article', 'page'}), {'article'})


class RatingStoreTests(TestCase):

    def setUp(self):
        self.store = RatingStore()
        self.enabled = RatingConfig({'article': True})
        self.disabled = RatingConfig({'article': False})

    def test_insert_then_load_returns_rating(self):
        self.store.insert(article(rating=3), self.enabled)

        record = RatingRecord.objects.get()
        self.assertEqual((record.nid, record.vid, record.rating), (10, 101, 3))

        item = article()
        self.store.load([item], {'article'}, self.enabled)
        self.assertEqual(item.rating, 3)

    def test_disabled_type_writes_nothing(self):
        self.store.insert(article(rating=3), self.disabled)
        self.store.update(article(rating=4), self.disabled)
        self.assertFalse(RatingRecord.objects.exists())
        self.assertIsNone(self.store.render(article(rating=4), self.disabled))

    def test_load_without_participating_types_runs_no_query(self):
        RatingRecord.objects.create(nid=10, vid=101, rating=3)
        item = article()
        with self.assertNumQueries(0):
            self.store.load([item], {'article'}, self.disabled)
        self.assertIsNone(item.rating)

    def test_load_without_revisions_runs_no_query(self):
        item = article(vid=None)
        with self.assertNumQueries(0):
            self.store.load([item], {'article'}, self.enabled)

    def test_load_is_one_batched_query(self):
        RatingRecord.objects.create(nid=10, vid=101, rating=3)
        RatingRecord.objects.create(nid=11, vid=111, rating=5)
        first, second, unrated = article(), article(nid=11, vid=111), article(nid=12, vid=121)
        page = article(nid=13, vid=131, node_type='page')

        with self.assertNumQueries(1):
            self.store.load([first, second, unrated, page], {'article', 'page'}, self.enabled)

        self.assertEqual(first.rating, 3)
        self.assertEqual(second.rating, 5)
        self.assertIsNone(unrated.rating)
        self.assertIsNone(page.rating)

    def test_repeated_update_keeps_one_record(self):
        self.store.insert(article(rating=2), self.enabled)
        self.store.update(article(rating=4), self.enabled)
        self.store.update(article(rating=4), self.enabled)

        self.assertEqual(RatingRecord.objects.filter(vid=101).count(), 1)
        self.assertEqual(RatingRecord.objects.get(vid=101).rating, 4)

    def test_update_of_new_revision_inserts_and_keeps_history(self):
        self.store.insert(article(rating=3), self.enabled)
        self.store.update(article(vid=102, rating=5), self.enabled)

        self.assertEqual(RatingRecord.objects.get(vid=101).rating, 3)
        record = RatingRecord.objects.get(vid=102)
        self.assertEqual((record.nid, record.rating), (10, 5))

    def test_second_insert_for_a_revision_fails(self):
        self.store.insert(article(rating=3), self.enabled)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                self.store.insert(article(rating=4), self.enabled)

    def test_delete_removes_every_revision_even_when_disabled(self):
        self.store.insert(article(rating=3), self.enabled)
        self.store.update(article(vid=102, rating=5), self.enabled)
        RatingRecord.objects.create(nid=11, vid=111, rating=1)

        deleted = self.store.delete(10)

        self.assertEqual(deleted, 2)
        self.assertFalse(RatingRecord.objects.filter(nid=10).exists())
        self.assertTrue(RatingRecord.objects.filter(nid=11).exists())

    def test_render_unrated_item(self):
        self.assertEqual(self.store.render(article(), self.enabled), RenderableRating(0, 'Unrated'))

    def test_render_labels(self):
        self.assertEqual(self.store.render(article(rating=2), self.enabled).label, 'Needs improvement')
        self.assertEqual(self.store.render(article(rating=5), self.enabled).label, 'Excellent')

    def test_render_rejects_rating_outside_label_table(self):
        with self.assertRaises(KeyError):
            self.store.render(article(rating=9), self.enabled)

    def test_validate_requires_a_rating(self):
        result = self.store.validate(article(values={'title': 'An article'}), self.enabled)
        self.assertFalse(result.ok)
        self.assertEqual(result.field, 'rating')
        self.assertEqual(result.message, REQUIRED_MESSAGE)

        self.assertFalse(self.store.validate(article(values={'rating': ''}), self.enabled).ok)

    def test_validate_accepts_unrated_choice(self):
        self.assertTrue(self.store.validate(article(values={'rating': 0}), self.enabled).ok)
        self.assertTrue(self.store.validate(article(values={'rating': 3}), self.enabled).ok)

    def test_validate_ignores_disabled_types(self):
        self.assertTrue(self.store.validate(article(), self.disabled).ok)


class NodeLifecycleTests(TestCase):
    """Ratings follow nodes through the content signals."""

    def setUp(self):
        self.article_type = NodeType.objects.create(type='article', name='Article')
        self.page_type = NodeType.objects.create(type='page', name='Basic page')
        RatingConfig().set('article', True)

    def test_new_node_stores_rating(self):
        node = Node(type=self.article_type)
        item = node.save_revision({'title': 'Hello', 'rating': 3})

        self.assertTrue(RatingRecord.objects.filter(nid=node.nid, vid=item.vid, rating=3).exists())
        self.assertEqual(Node.objects.load([node.nid])[0].rating, 3)

    def test_new_revision_gets_its_own_rating(self):
        node = Node(type=self.article_type)
        first = node.save_revision({'title': 'Hello', 'rating': 3})
        second = node.save_revision({'title': 'Hello again', 'rating': 5})

        self.assertNotEqual(first.vid, second.vid)
        self.assertEqual(RatingRecord.objects.get(vid=first.vid).rating, 3)
        self.assertEqual(RatingRecord.objects.get(vid=second.vid).rating, 5)
        self.assertEqual(Node.objects.load([node.nid])[0].rating, 5)

    def test_saving_in_place_overwrites_rating(self):
        node = Node(type=self.article_type)
        item = node.save_revision({'title': 'Hello', 'rating': 3})
        node.save_revision({'title': 'Hello', 'rating': 1}, new_revision=False)

        self.assertEqual(RatingRecord.objects.filter(nid=node.nid).count(), 1)
        self.assertEqual(RatingRecord.objects.get(vid=item.vid).rating, 1)

    def test_enabling_type_later_creates_rating_on_update(self):
        node = Node(type=self.page_type)
        item = node.save_revision({'title': 'About'})
        self.assertFalse(RatingRecord.objects.exists())

        RatingConfig().set('page', True)
        node.save_revision({'title': 'About', 'rating': 4}, new_revision=False)

        self.assertEqual(RatingRecord.objects.get(vid=item.vid).rating, 4)

    def test_unrated_types_are_not_annotated(self):
        node = Node(type=self.page_type)
        node.save_revision({'title': 'About', 'rating': 4})

        self.assertFalse(RatingRecord.objects.exists())
        self.assertIsNone(Node.objects.load([node.nid])[0].rating)

    def test_deleting_node_removes_ratings_after_type_disabled(self):
        node = Node(type=self.article_type)
        node.save_revision({'title': 'Hello', 'rating': 3})
        node.save_revision({'title': 'Hello', 'rating': 5})
        RatingConfig().set('article', False)

        node.delete()

        self.assertFalse(RatingRecord.objects.exists())

    def test_admin_bulk_delete_removes_ratings(self):
        node = Node(type=self.article_type)
        node.save_revision({'title': 'Hello', 'rating': 3})
        other = Node(type=self.article_type)
        other.save_revision({'title': 'Kept', 'rating': 4})

        request = RequestFactory().post('/admin/content/node/')
        request.user = get_user_model().objects.create_superuser('admin', password='secret')
        admin.site._registry[Node].delete_queryset(request, Node.objects.filter(nid=node.nid))

        self.assertFalse(Node.objects.filter(nid=node.nid).exists())
        self.assertFalse(RatingRecord.objects.filter(nid=node.nid).exists())
        self.assertTrue(RatingRecord.objects.filter(nid=other.nid).exists())

    def test_deleting_type_forgets_setting(self):
        self.article_type.delete()
        self.assertFalse(RatingTypeSetting.objects.filter(node_type='article').exists())


class RatingFormTests(TestCase):

    def setUp(self):
        self.article_type = NodeType.objects.create(type='article', name='Article')
        self.page_type = NodeType.objects.create(type='page', name='Basic page')
        RatingConfig().set('article', True)

    def test_rating_field_only_for_enabled_types(self):
        self.assertIn('rating', NodeForm(node_type=self.article_type).fields)
        self.assertNotIn('rating', NodeForm(node_type=self.page_type).fields)

    def test_rating_field_offers_six_choices(self):
        choices = [value for value, label in NodeForm(node_type=self.article_type).fields['rating'].choices]
        self.assertEqual(choices, ['', 0, 1, 2, 3, 4, 5])

    def test_missing_rating_is_a_field_error(self):
        form = NodeForm({'title': 'Hello'}, node_type=self.article_type)
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['rating'], [REQUIRED_MESSAGE])

    def test_invalid_choice_reports_only_the_field_error(self):
        form = NodeForm({'title': 'Hello', 'rating': '9'}, node_type=self.article_type)

        self.assertFalse(form.is_valid())
        self.assertEqual(len(form.errors['rating']), 1)
        self.assertNotIn(REQUIRED_MESSAGE, form.errors['rating'])

    def test_unrated_choice_is_valid(self):
        form = NodeForm({'title': 'Hello', 'rating': '0'}, node_type=self.article_type)
        self.assertTrue(form.is_valid(), form.errors)

        node, item = form.save()
        self.assertEqual(RatingRecord.objects.get(vid=item.vid).rating, 0)

    def test_edit_form_starts_from_stored_rating(self):
        node = Node(type=self.article_type)
        node.save_revision({'title': 'Hello', 'rating': 4})
        item = Node.objects.load([node.nid])[0]

        form = NodeForm(node_type=self.article_type, node=node, item=item)
        self.assertEqual(form.fields['rating'].initial, 4)

    def test_node_type_form_toggles_rating(self):
        form = NodeTypeForm(instance=self.page_type)
        self.assertFalse(form.fields['rating_enabled'].initial)

        form = NodeTypeForm({'name': 'Basic page', 'rating_enabled': 'on'}, instance=self.page_type)
        self.assertTrue(form.is_valid(), form.errors)
        form.save()

        self.assertTrue(RatingConfig.load().is_participating('page'))
        self.assertTrue(NodeTypeForm(instance=self.page_type).fields['rating_enabled'].initial)


class RatingDisplayTests(TestCase):

    def setUp(self):
        self.article_type = NodeType.objects.create(type='article', name='Article')
        RatingConfig().set('article', True)
        self.node = Node(type=self.article_type)
        self.node.save_revision({'title': 'Hello', 'body': 'Some text', 'rating': 4})

    def test_template_tag_renders_label(self):
        item = Node.objects.load([self.node.nid])[0]
        html = Template("{% load rating_tags %}{% node_rating item %}").render(Context({'item': item}))
        self.assertIn('Good', html)
        self.assertIn('(4/5)', html)

    def test_template_tag_renders_unrated(self):
        item = article(nid=99, vid=999)
        html = Template("{% load rating_tags %}{% node_rating item %}").render(Context({'item': item}))
        self.assertIn('Unrated', html)

    def test_template_tag_renders_nothing_for_disabled_type(self):
        item = article(node_type='page', rating=4)
        html = Template("{% load rating_tags %}{% node_rating item %}").render(Context({'item': item}))
        self.assertEqual(html.strip(), '')

    def test_node_page_shows_rating(self):
        response = self.client.get(reverse('node_detail', args=[self.node.nid]))
        self.assertContains(response, 'Rating:')
        self.assertContains(response, 'Good')


class RatingApiTests(TestCase):

    def setUp(self):
        User = get_user_model()
        self.staff = User.objects.create_user('editor', password='secret', is_staff=True)
        self.author = User.objects.create_user('author', password='secret')
        self.article_type = NodeType.objects.create(type='article', name='Article')
        self.node = Node(type=self.article_type)
        self.item = self.node.save_revision({'title': 'Hello'})

    def test_get_type_setting(self):
        response = self.client.get(reverse('rating_type_setting', args=['article']))
        self.assertEqual(response.json(), {'type': 'article', 'enabled': False})

    def test_unknown_type_is_404(self):
        response = self.client.get(reverse('rating_type_setting', args=['missing']))
        self.assertEqual(response.status_code, 404)

    def test_staff_can_enable_type(self):
        self.client.force_login(self.staff)
        response = self.client.post(reverse('rating_type_setting', args=['article']), {'enabled': 'true'})

        self.assertEqual(response.json(), {'type': 'article', 'enabled': True})
        self.assertTrue(RatingConfig.load().is_participating('article'))

    def test_non_staff_cannot_change_type(self):
        self.client.force_login(self.author)
        response = self.client.post(reverse('rating_type_setting', args=['article']), {'enabled': 'true'})

        self.assertEqual(response.status_code, 403)
        self.assertFalse(RatingConfig.load().is_participating('article'))

    def test_node_rating_for_disabled_type_is_null(self):
        response = self.client.get(reverse('rating_node', args=[self.node.nid]))
        data = response.json()
        self.assertEqual(data['nid'], self.node.nid)
        self.assertIsNone(data['rating'])
        self.assertIsNone(data['label'])

    def test_post_rating_creates_revision(self):
        RatingConfig().set('article', True)
        self.client.force_login(self.author)

        response = self.client.post(reverse('rating_node', args=[self.node.nid]), {'rating': '5'})

        data = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertNotEqual(data['vid'], self.item.vid)
        self.assertEqual((data['rating'], data['label']), (5, 'Excellent'))
        self.assertEqual(RatingRecord.objects.get(vid=data['vid']).rating, 5)

    def test_post_without_rating_is_rejected(self):
        RatingConfig().set('article', True)
        self.client.force_login(self.author)

        response = self.client.post(reverse('rating_node', args=[self.node.nid]), {})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'], {'rating': [REQUIRED_MESSAGE]})
        self.assertFalse(RatingRecord.objects.exists())

    def test_post_for_unrated_type_changes_nothing(self):
        self.client.force_login(self.author)

        response = self.client.post(reverse('rating_node', args=[self.node.nid]), {'rating': '5'})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['status'], 'error')
        self.node.refresh_from_db()
        self.assertEqual(self.node.vid, self.item.vid)
        self.assertEqual(self.node.revisions.count(), 1)
        self.assertFalse(RatingRecord.objects.exists())

    def test_anonymous_post_is_rejected(self):
        response = self.client.post(reverse('rating_node', args=[self.node.nid]), {'rating': '3'})
        self.assertEqual(response.status_code, 403)


class UninstallCommandTests(TestCase):

    def test_removes_records_and_settings(self):
        RatingConfig().set('article', True)
        RatingRecord.objects.create(nid=10, vid=101, rating=3)
        out = StringIO()

        call_command('uninstall_rating', stdout=out)

        self.assertFalse(RatingRecord.objects.exists())
        self.assertFalse(RatingTypeSetting.objects.exists())
        self.assertIn('Removed 1 rating record(s) and 1 content type setting(s).', out.getvalue())
