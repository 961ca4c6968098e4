import pytest

from subjects import DEFAULT_COLORS, SubjectCatalog


@pytest.fixture
def catalog(store):
    return SubjectCatalog(store)


def test_add_and_list(catalog):
    math = catalog.add('  Math ')
    art = catalog.add('Art', color='#123456')

    assert [s.name for s in catalog.list()] == ['Math', 'Art']
    assert math.color == DEFAULT_COLORS[0]
    assert art.color == '#123456'
    assert catalog.get(art.id) == art


@pytest.mark.parametrize('name', ['math', 'MATH', ' Math '])
def test_names_are_unique_ignoring_case(catalog, name):
    catalog.add('Math')
    with pytest.raises(ValueError):
        catalog.add(name)


def test_empty_name_rejected(catalog):
    with pytest.raises(ValueError):
        catalog.add('   ')


def test_rename(catalog):
    math = catalog.add('Math')
    catalog.add('Art')

    assert catalog.rename(math.id, 'Mathematics')
    assert catalog.get(math.id).name == 'Mathematics'
    # Changing only the case of its own name is allowed
    assert catalog.rename(math.id, 'MATHEMATICS')
    with pytest.raises(ValueError):
        catalog.rename(math.id, 'art')
    assert not catalog.rename('missing', 'Biology')


def test_remove(catalog, store):
    math = catalog.add('Math')
    saves = store.saves

    assert catalog.remove(math.id) == 1
    assert catalog.remove(math.id) == 0
    assert catalog.list() == []
    assert store.saves == saves + 1
