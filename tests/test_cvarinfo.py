import json
from unittest import TestCase, main

from doomfront import (CVar, CVarInfo, Color, Flag, FlagKind, Interner, Span,
                       StorageType, UnexpectedInput, Value)


SOURCE = r'''

server int delusive_bunker = 42;

USER
latch BOOL MEAT_GRINDER = false;

nOsAvE 	cheat color blueroom =
"F5 3a 95";

// a valid single-line comment

nosave server
noarchive 	float
fullConfession = 0.369;

/* ***
a valid block comment //
*/

/**/
/***/

server user nosave cheat noarchive latch server bool ch3mic4l_br3w;

user
	nosave
string
KatanaZERO
=
"LudoWic";
'''


class TestCVarInfo(TestCase):
    def setUp(self):
        self.interner = Interner()
        self.cvarinfo = CVarInfo.parse(SOURCE, self.interner)

    def test_smoke(self):
        self.assertEqual(len(self.cvarinfo), 6, "Expected 6 CVar definitions, read %d." % len(self.cvarinfo))
        self.assertEqual([cvar.name.text for cvar in self.cvarinfo], [
            "delusive_bunker", "MEAT_GRINDER", "blueroom", "fullConfession", "ch3mic4l_br3w", "KatanaZERO",
        ])

    def test_smoke_types(self):
        self.assertEqual([cvar.type_spec.storage_type for cvar in self.cvarinfo], [
            StorageType.Int, StorageType.Bool, StorageType.Color,
            StorageType.Float, StorageType.Bool, StorageType.String,
        ])

    def test_smoke_flags(self):
        flags = [[f.kind for f in cvar.flags] for cvar in self.cvarinfo]
        self.assertEqual(flags[0], [FlagKind.Server])
        self.assertEqual(flags[1], [FlagKind.User, FlagKind.Latch])
        self.assertEqual(flags[2], [FlagKind.NoSave, FlagKind.Cheat])
        self.assertEqual(flags[3], [FlagKind.NoSave, FlagKind.Server, FlagKind.NoArchive])
        self.assertEqual(len(flags[4]), 7)
        self.assertEqual(flags[4][0], FlagKind.Server)
        self.assertEqual(flags[4][-1], FlagKind.Server)
        self.assertEqual(flags[5], [FlagKind.User, FlagKind.NoSave])

    def test_smoke_values(self):
        values = [cvar.init and cvar.init.value for cvar in self.cvarinfo]
        self.assertEqual(values[0], Value(StorageType.Int, 42))
        self.assertEqual(values[1], Value(StorageType.Bool, False))
        self.assertEqual(values[2], Value(StorageType.Color, Color(red=245, green=58, blue=149)),
                         "Test case [2]'s initializer is an incorrect color or a non-color.")
        self.assertEqual(values[3].storage_type, StorageType.Float)
        self.assertAlmostEqual(values[3].data, 0.369, places=6)
        self.assertIsNone(values[4])
        self.assertEqual(values[5], Value(StorageType.String, "LudoWic"))

    def test_spans_valid(self):
        for cvar in self.cvarinfo:
            nodes = [cvar, cvar.type_spec, cvar.name] + list(cvar.flags)
            if cvar.init is not None:
                nodes.append(cvar.init)
            for node in nodes:
                assert node.span.validate(SOURCE), node
        self.assertEqual(self.cvarinfo[0].span.slice(SOURCE), "server int delusive_bunker = 42;")
        self.assertEqual(self.cvarinfo[2].init.span.slice(SOURCE), '=\n"F5 3a 95"')

    def test_interned_names(self):
        self.assertEqual(len(self.interner), 6)
        for cvar in self.cvarinfo:
            self.assertIs(cvar.name.string.interner, self.interner)
            self.assertEqual(cvar.name.string, self.interner.intern(cvar.name.text))

    def test_sequence(self):
        self.assertEqual(self.cvarinfo[-1].name.text, "KatanaZERO")
        self.assertEqual(len(list(self.cvarinfo)), 6)
        self.assertEqual(len(self.cvarinfo[1:3]), 2)

    def test_by_name(self):
        cvar = self.cvarinfo.by_name("blueroom")
        self.assertIs(cvar, self.cvarinfo[2])
        self.assertIsNone(self.cvarinfo.by_name("BLUEROOM"))

    def test_has_flag(self):
        cvar = self.cvarinfo.by_name("fullConfession")
        assert cvar.has_flag(FlagKind.NoArchive)
        assert not cvar.has_flag(FlagKind.Cheat)

    def test_immutable(self):
        cvar = self.cvarinfo[0]
        with self.assertRaises(AttributeError):
            cvar.init = None
        with self.assertRaises(AttributeError):
            cvar.init.value.data = 7
        self.assertIsInstance(cvar.flags, tuple)
        self.assertIsInstance(self.cvarinfo.definitions, tuple)

    def test_same_interner_equal(self):
        again = CVarInfo.parse(SOURCE, self.interner)
        self.assertEqual(again, self.cvarinfo)
        self.assertEqual(hash(again), hash(self.cvarinfo))

    def test_round_trip_determinism(self):
        other = CVarInfo.parse(SOURCE, Interner())
        # Names come from different interners, so the trees differ...
        self.assertNotEqual(other, self.cvarinfo)
        # ...but agree on everything else
        self.assertEqual(other.serialize(), self.cvarinfo.serialize())

    def test_serialize(self):
        cvar, = CVarInfo.parse("server int x = 5;", Interner())
        self.assertEqual(cvar.serialize(), {
            '__type__': 'CVar',
            'span': {'start': 0, 'end': 17, '__type__': 'Span'},
            'flags': [{'span': {'start': 0, 'end': 6, '__type__': 'Span'}, 'kind': 'Server', '__type__': 'Flag'}],
            'type_spec': {'span': {'start': 7, 'end': 10, '__type__': 'Span'}, 'storage_type': 'Int',
                          '__type__': 'TypeSpec'},
            'name': {'span': {'start': 11, 'end': 12, '__type__': 'Span'}, 'string': 'x', '__type__': 'Identifier'},
            'init': {'span': {'start': 13, 'end': 16, '__type__': 'Span'}, 'value': {'Int': 5},
                     '__type__': 'Initializer'},
        })

    def test_serialize_values(self):
        self.assertEqual(Value(StorageType.Color, Color(1, 2, 3)).serialize(),
                         {'Color': {'red': 1, 'green': 2, 'blue': 3}})
        self.assertEqual(Value(StorageType.Bool, True).serialize(), {'Bool': True})
        self.assertEqual(Value(StorageType.String, "s").serialize(), {'String': "s"})

    def test_serialize_no_init(self):
        data = self.cvarinfo.by_name("ch3mic4l_br3w").serialize()
        self.assertIsNone(data['init'])

    def test_serialize_is_json(self):
        data = json.loads(json.dumps(self.cvarinfo.serialize()))
        self.assertEqual(data['__type__'], 'CVarInfo')
        self.assertEqual(len(data['definitions']), 6)
        self.assertEqual(data['definitions'][5]['name']['string'], "KatanaZERO")

    def test_build_by_hand(self):
        interner = Interner()
        flag = Flag(Span(0, 4), FlagKind.User)
        self.assertEqual(flag.kind, FlagKind.User)
        parsed, = CVarInfo.parse("user bool b;", interner)
        self.assertEqual(parsed.flags, (flag,))
        self.assertIsInstance(parsed, CVar)

    def test_malformed_second_definition(self):
        with self.assertRaises(UnexpectedInput):
            CVarInfo.parse(SOURCE + "\nint broken = ;", Interner())


if __name__ == '__main__':
    main()
