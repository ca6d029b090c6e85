"""
Tests for the listing query accumulator.
"""

from facetsearch.query import ConstraintKind, ListingQuery, Relation


class TestListingQuery:
    """Test ListingQuery behaviour."""

    def test_vars(self):
        """Test scalar query variables can be set, read and removed."""
        query = ListingQuery({'post_type': 'listing'})
        query.set('s', 'pizza')
        assert query.get('s') == 'pizza'
        assert query.get('missing', 'fallback') == 'fallback'

        query.unset('s')
        query.unset('never-set')
        assert query.vars == {'post_type': 'listing'}

    def test_constraint_group_is_a_copy(self):
        """Test mutating a fetched group does not change the query."""
        query = ListingQuery()
        group = query.get_constraint_group(ConstraintKind.TAXONOMY)
        group.append({'taxonomy': 'listing_tag'})
        assert query.get_constraint_group(ConstraintKind.TAXONOMY) == []

    def test_add_constraint_appends(self):
        """Test constraints accumulate in order."""
        query = ListingQuery()
        query.add_constraint(ConstraintKind.META, {'key': 'a'})
        query.add_constraint('meta_query', {'key': 'b'})
        assert [c['key'] for c in query.get_constraint_group(ConstraintKind.META)] == ['a', 'b']

    def test_relation_defaults_to_and(self):
        """Test groups combine with AND unless told otherwise."""
        query = ListingQuery()
        assert query.get_relation(ConstraintKind.TAXONOMY) == Relation.AND
        query.set_relation(ConstraintKind.TAXONOMY, 'OR')
        assert query.get_relation(ConstraintKind.TAXONOMY) == Relation.OR

    def test_to_dict(self):
        """Test serialization includes non-empty groups with their relation."""
        query = ListingQuery({'post_type': 'listing'})
        query.add_constraint(ConstraintKind.TAXONOMY, {'taxonomy': 'listing_tag', 'terms': [1]})
        query.set_constraint_group(ConstraintKind.META, [])

        assert query.to_dict() == {
            'post_type': 'listing',
            'tax_query': {
                'relation': 'AND',
                'constraints': [{'taxonomy': 'listing_tag', 'terms': [1]}],
            },
        }

    def test_to_dict_is_detached(self):
        """Test the serialized form can be changed without touching the query."""
        query = ListingQuery()
        query.add_constraint(ConstraintKind.TAXONOMY, {'terms': [1]})
        data = query.to_dict()
        data['tax_query']['constraints'][0]['terms'].append(2)
        assert query.get_constraint_group(ConstraintKind.TAXONOMY) == [{'terms': [1]}]
